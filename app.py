import streamlit as st
import numpy as np
from PIL import Image
import io

from cartoonizer import CartoonConfig, HalftoneConfig, CartoonizerError, run_cartoon
from cartoonizer.logging_config import setup_logging

setup_logging()

# ======================
# PAGE CONFIG
# ======================
st.set_page_config(layout="wide")
st.title("🖍️ Cartoonizer")

# ======================
# SIDEBAR PARAMETERS
# ======================
st.sidebar.header("Color Regions")

spatial_radius = st.sidebar.slider("Spatial Radius", 1.0, 40.0, 10.0, 1.0)
color_radius = st.sidebar.slider("Color Radius", 1.0, 60.0, 20.0, 1.0)
max_level = st.sidebar.slider("Pyramid Levels", 0, 3, 1)
max_size = st.sidebar.slider("Max Image Size", 256, 1536, 800, 32)

st.sidebar.markdown("---")
st.sidebar.header("Outlines")

block_size = st.sidebar.select_slider("Threshold Block Size", [3, 5, 7, 9, 11, 15, 21], value=9)
threshold_c = st.sidebar.slider("Threshold C", 0.0, 20.0, 9.0, 0.5)
diffusion_iters = st.sidebar.slider("Diffusion Iterations", 0, 30, 10)

st.sidebar.markdown("---")
st.sidebar.header("Halftone")

use_halftone = st.sidebar.checkbox("Halftone Screen", value=False)
angle_0 = st.sidebar.slider("Channel 0 Angle", 0.0, 90.0, 0.0, 1.0, disabled=not use_halftone)
angle_1 = st.sidebar.slider("Channel 1 Angle", 0.0, 90.0, 33.0, 1.0, disabled=not use_halftone)
angle_2 = st.sidebar.slider("Channel 2 Angle", 0.0, 90.0, 66.0, 1.0, disabled=not use_halftone)
max_radius = st.sidebar.slider("Max Dot Radius", 1.0, 15.0, 7.5, 0.5, disabled=not use_halftone)

# ======================
# IMAGE INPUT
# ======================
st.header("Input Image")

photo_file = st.file_uploader("Photograph", ["jpg", "png", "jpeg"])

# ======================
# HELPERS
# ======================
def numpy_image_to_bytes(img_np):
    img_pil = Image.fromarray(img_np.astype(np.uint8))
    buf = io.BytesIO()
    img_pil.save(buf, format="PNG")
    return buf.getvalue()

# ======================
# RUN
# ======================
if st.button("🚀 Cartoonize") and photo_file:
    photo = np.array(Image.open(photo_file).convert("RGB"))

    config = CartoonConfig(
        spatial_radius=spatial_radius,
        color_radius=color_radius,
        max_pyramid_level=max_level,
        diffusion_iterations=diffusion_iters,
        threshold_block_size=block_size,
        threshold_c=threshold_c,
        max_size=max_size,
        use_halftone=use_halftone,
        halftone=HalftoneConfig(
            max_radius=max_radius,
            screen_angles=(angle_0, angle_1, angle_2),
            parallel=True,
        ),
    )

    try:
        with st.spinner("Rendering cartoon..."):
            output, metrics = run_cartoon(photo, config)
    except CartoonizerError as e:
        st.error(f"Cartoonizing failed: {e}")
        st.stop()

    # ======================
    # DISPLAY RESULTS
    # ======================
    st.header("Results")

    colA, colB = st.columns(2)

    with colA:
        st.image(photo, caption="Original", use_container_width=True)

    with colB:
        st.image(output, caption="Cartoon", use_container_width=True)

    st.subheader("📊 Metrics")

    st.table({
        "Metric": list(metrics.keys()),
        "Value": list(metrics.values())
    })

    # ======================
    # DOWNLOAD
    # ======================
    img_bytes = numpy_image_to_bytes(output)

    st.download_button(
        label="💾 Download Cartoon",
        data=img_bytes,
        file_name="cartoon.png",
        mime="image/png"
    )
