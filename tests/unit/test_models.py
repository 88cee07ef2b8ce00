"""Tests for nanostudio.core.models - enums and dataclasses."""

import base64
import binascii

import pytest

from nanostudio.core.models import (
    GeneratedImage,
    GenerationRequest,
    ModelId,
    ReferenceImage,
)


class TestModelId:
    def test_values_match_remote_model_names(self):
        assert ModelId.FAST.value == "gemini-2.5-flash-image"
        assert ModelId.PRO.value == "gemini-3-pro-image-preview"

    def test_labels(self):
        assert ModelId.FAST.label == "Nano"
        assert ModelId.PRO.label == "Nano Pro"

    @pytest.mark.parametrize(
        "value",
        ["gemini-3-pro-image-preview", "PRO", "Nano Pro", ModelId.PRO],
    )
    def test_from_value_accepts_id_name_and_label(self, value):
        assert ModelId.from_value(value) is ModelId.PRO

    def test_from_value_unknown(self):
        with pytest.raises(ValueError, match="Unknown model"):
            ModelId.from_value("dall-e")


class TestReferenceImage:
    def test_from_base64(self):
        image = ReferenceImage.from_base64(base64.b64encode(b"abc").decode(), "image/png")
        assert image.data == b"abc"
        assert image.mime_type == "image/png"
        assert image.to_base64() == base64.b64encode(b"abc").decode()

    def test_from_base64_empty_mime_is_none(self):
        assert ReferenceImage.from_base64("QUJD", "").mime_type is None

    def test_from_base64_rejects_garbage(self):
        with pytest.raises(binascii.Error):
            ReferenceImage.from_base64("not base64!!")

    def test_from_path_guesses_mime(self, temp_dir):
        path = temp_dir / "ref.png"
        path.write_bytes(b"\x89PNG")
        image = ReferenceImage.from_path(path)
        assert image.data == b"\x89PNG"
        assert image.mime_type == "image/png"

    def test_from_path_unknown_extension(self, temp_dir):
        path = temp_dir / "ref.unknownext"
        path.write_bytes(b"data")
        assert ReferenceImage.from_path(path).mime_type is None


class TestGenerationRequest:
    def test_defaults(self):
        request = GenerationRequest()
        assert request.model is ModelId.FAST
        assert request.prompt == ""
        assert request.reference_images == []
        assert request.aspect_ratio == "1:1"
        assert request.image_size == "1K"

    @pytest.mark.parametrize(
        "prompt, images, expected",
        [
            ("cat", [], True),
            ("   ", [], False),
            ("", [ReferenceImage(b"x")], True),
            ("", [], False),
        ],
    )
    def test_has_input(self, prompt, images, expected):
        assert GenerationRequest(prompt=prompt, reference_images=images).has_input() is expected


class TestGeneratedImage:
    def test_to_dict_keys(self, sample_image):
        assert set(sample_image.to_dict()) == {"id", "url", "prompt", "model", "timestamp"}

    def test_from_dict(self, sample_image):
        assert GeneratedImage.from_dict(sample_image.to_dict()) == sample_image

    def test_from_dict_missing_prompt(self):
        image = GeneratedImage.from_dict(
            {"id": "a", "url": "data:image/png;base64,QUJD", "model": "Nano", "timestamp": 1}
        )
        assert image.prompt == ""

    def test_is_immutable(self, sample_image):
        with pytest.raises(AttributeError):
            sample_image.prompt = "changed"
