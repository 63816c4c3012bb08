import streamlit as st

from backend.app.charts.export import ExportedImage
from backend.app.session import ChartSession


def render_preview(session: ChartSession) -> None:
    spec = session.spec()
    if spec.empty:
        st.info("Add at least one category to draw the chart.")

    st.plotly_chart(
        session.figure(),
        use_container_width=False,
        config={"displayModeBar": False, "staticPlot": False},
        key=f"preview_{session.store.revision}",
    )
    st.caption(f"● {spec.export_dimensions.label} (2x Export)")


def render_export(session: ChartSession) -> None:
    """
    Export button -> background rasterization -> download button.
    """
    if st.button("⬇️ Export PNG", type="primary", use_container_width=True, key="export_png"):
        future = session.exporter.submit(session.figure())
        with st.spinner("Rendering image..."):
            image = future.result()
        # failures arrive as notices; keep the last good export otherwise
        if image is not None:
            st.session_state["last_export"] = image

    image: ExportedImage = st.session_state.get("last_export")
    if image is not None:
        st.download_button(
            f"Save {image.filename}",
            data=image.data,
            file_name=image.filename,
            mime=image.mime,
            use_container_width=True,
            key="download_png",
        )
