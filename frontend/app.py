import requests
import streamlit as st

from frontend.client import (
    BACKEND_URL,
    call_generate,
    create_session,
    data_url_to_image,
    download_result,
    error_detail,
    fetch_default_prompt,
    fetch_presets,
    poll_session,
    reset_session,
    selected_preset_id,
    upload_image,
)

# ==========================
# Config
# ==========================
st.set_page_config(
    page_title="StyleShift",
    page_icon="👔",
    layout="wide"
)

st.title("👔 StyleShift")
st.caption("Upload a photo and swap outfits with Gemini")

# ==========================
# State
# ==========================
if "session" not in st.session_state:
    st.session_state["session"] = create_session()

if "prompt" not in st.session_state:
    st.session_state["prompt"] = fetch_default_prompt()

if "presets" not in st.session_state:
    st.session_state["presets"] = fetch_presets()

session = st.session_state["session"]
session_id = session["session_id"]
phase = session["phase"]
is_processing = phase == "processing"

# ==========================
# Sidebar
# ==========================
with st.sidebar:
    st.header("⚙️ Session")
    st.markdown(f"**Phase:** `{phase}`")

    if st.button("🔄 New session", use_container_width=True):
        st.session_state["session"] = reset_session(session_id)
        st.rerun()

    st.markdown("---")
    st.write("🔗 Backend:", BACKEND_URL)

# ==========================
# Upload
# ==========================
if phase == "idle":
    st.markdown("### 1. Upload Photo")
    st.caption("Full body or upper body shots work best. JPG, PNG, WEBP.")
    uploaded = st.file_uploader("Photo", type=["png", "jpg", "jpeg", "webp"])
    if uploaded is not None:
        mime_type = uploaded.type or ""
        if not mime_type.startswith("image/"):
            st.error("Please upload a valid image file")
        else:
            try:
                st.session_state["session"] = upload_image(session_id, uploaded.getvalue(), mime_type)
                st.rerun()
            except requests.HTTPError as e:
                st.error(f"❌ {error_detail(e)}")
    st.stop()

# ==========================
# Original / result
# ==========================
if session.get("error_message"):
    st.error(f"⚠️ {session['error_message']}")

col1, col2 = st.columns(2)
with col1:
    st.image(data_url_to_image(session["original_image"]["data_url"]), caption="Original", use_container_width=True)
with col2:
    if session.get("generated_image"):
        st.image(data_url_to_image(session["generated_image"]["data_url"]), caption="✨ Result", use_container_width=True)
        try:
            img_bytes, filename, mime = download_result(session_id)
            st.download_button("⬇️ Download", data=img_bytes, file_name=filename, mime=mime)
        except requests.HTTPError as e:
            st.error(f"❌ {error_detail(e)}")
        except requests.RequestException as e:
            st.error(f"❌ Backend unreachable: {e}")
    elif is_processing:
        st.info("🎨 Generating...")

# ==========================
# Style selection
# ==========================
st.markdown("### 2. Select Style")
preset_cols = st.columns(len(st.session_state["presets"]))
active_preset = selected_preset_id(st.session_state["prompt"], st.session_state["presets"])
for col, preset in zip(preset_cols, st.session_state["presets"]):
    with col:
        if st.button(f"{preset['icon']} {preset['label']}", key=f"preset_{preset['id']}",
                     type="primary" if preset["id"] == active_preset else "secondary",
                     disabled=is_processing, use_container_width=True):
            st.session_state["prompt"] = preset["prompt"]
            st.rerun()

prompt = st.text_area("Describe the outfit", key="prompt", disabled=is_processing, height=100)

# ==========================
# Generate
# ==========================
if st.button("✨ Transform", type="primary", disabled=is_processing or not prompt.strip()):
    try:
        st.session_state["session"] = call_generate(session_id, prompt)
        with st.spinner("🎨 AI is changing the outfit..."):
            result = poll_session(session_id)
        if result is None:
            st.session_state["session"] = create_session()
        else:
            st.session_state["session"] = result
    except requests.HTTPError as e:
        st.error(f"❌ {error_detail(e)}")
    except requests.RequestException as e:
        st.error(f"❌ Backend unreachable: {e}")
    else:
        st.rerun()
