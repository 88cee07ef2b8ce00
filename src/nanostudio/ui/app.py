"""Gradio UI for Nano Studio."""

import logging

import gradio as gr

from nanostudio.core.config import StudioConfig, config
from nanostudio.core.models import ASPECT_RATIOS, DEFAULT_ASPECT_RATIO, IMAGE_SIZES, ModelId

from .handlers import (
    MODEL_CHOICES,
    clear_gallery,
    export_selected,
    generate_image,
    refresh_gallery,
)
from .state import StudioSession, initialize_session

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def create_ui(session: StudioSession) -> gr.Blocks:
    """Create the Gradio UI.

    Args:
        session: Session holding the orchestrator, store and caches

    Returns:
        Gradio Blocks app
    """
    app = gr.Blocks(title="Nano Studio")

    with app:
        gr.Markdown(
            """
            # Nano Studio
            ### Gemini image generation with a local gallery
            """
        )

        with gr.Row():
            with gr.Column(scale=1):
                prompt_input = gr.Textbox(
                    label="Prompt",
                    placeholder="Describe the image, or how to change the reference images...",
                    lines=4,
                )

                model_input = gr.Radio(
                    choices=MODEL_CHOICES,
                    value=ModelId.FAST.label,
                    label="Model",
                    info="Nano is fast; Nano Pro supports up to 4K with more detail",
                )

                with gr.Row():
                    aspect_ratio_input = gr.Dropdown(
                        choices=list(ASPECT_RATIOS),
                        value=DEFAULT_ASPECT_RATIO,
                        label="Aspect Ratio",
                    )
                    image_size_input = gr.Radio(
                        choices=list(IMAGE_SIZES),
                        value=IMAGE_SIZES[0],
                        label="Resolution (Nano Pro only)",
                        interactive=False,
                    )

                reference_input = gr.File(
                    label="Reference Images",
                    file_count="multiple",
                    file_types=["image"],
                    type="filepath",
                )

                access_code_input = gr.Textbox(
                    label="Access Code",
                    type="password",
                    value=(session.credentials.get() or "") if session.credentials else "",
                    visible=session.requires_access_code,
                )

                with gr.Row():
                    generate_btn = gr.Button("Generate", variant="primary")
                    clear_btn = gr.Button("Clear Gallery", variant="stop")

                status_output = gr.Markdown("")

            with gr.Column(scale=2):
                gallery_output = gr.Gallery(
                    label="Gallery",
                    columns=3,
                    height=720,
                    object_fit="contain",
                )

        def on_model_change(model_label: str):
            return gr.update(interactive=model_label == ModelId.PRO.label)

        async def on_generate(prompt, model_label, aspect_ratio, image_size, files, access_code):
            async for update in generate_image(
                session, prompt, model_label, aspect_ratio, image_size, files, access_code
            ):
                yield update

        def on_clear():
            return clear_gallery(session)

        def on_select(evt: gr.SelectData):
            return export_selected(session, evt.index)

        def on_load():
            return refresh_gallery(session)

        model_input.change(
            fn=on_model_change,
            inputs=[model_input],
            outputs=[image_size_input],
        )

        # No concurrency limit: a second generation may start while the
        # first is still running.
        generate_btn.click(
            fn=on_generate,
            inputs=[
                prompt_input,
                model_input,
                aspect_ratio_input,
                image_size_input,
                reference_input,
                access_code_input,
            ],
            outputs=[gallery_output, status_output, access_code_input],
            concurrency_limit=None,
        )

        clear_btn.click(
            fn=on_clear,
            outputs=[gallery_output, status_output],
        )

        gallery_output.select(fn=on_select, outputs=[status_output])

        app.load(fn=on_load, outputs=[gallery_output, status_output])

    return app


def main(settings: StudioConfig | None = None):
    """Main entry point for the application."""
    settings = settings or config
    logger.info("Starting Nano Studio...")
    logger.info(f"Configuration: data_dir={settings.data_dir}, server_url={settings.server_url}")

    session = initialize_session(settings)
    app = create_ui(session)

    app.queue().launch(
        server_name=settings.gradio_server_name,
        server_port=settings.gradio_server_port,
        share=settings.gradio_share,
        show_error=True,
    )


if __name__ == "__main__":
    main()
