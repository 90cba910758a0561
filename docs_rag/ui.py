# Run from project root: streamlit run docs_rag/ui.py
# UI talks to backend API (POST /query/stream for SSE, POST /mcp/tools/list_files to browse the docs root).

import json
import os

import requests
import streamlit as st

# Backend config
API_BASE = os.environ.get("API_BASE", "http://localhost:8000")

st.title("Docs Retrieval Agent")
st.caption(
    "Send any coding prompt. The agent infers which documentation the coding agent will need, "
    "searches the docs with list_files, grep and read_file, and returns the relevant sections."
)

# Browse the top level of the documentation tree
with st.expander("Documentation root"):
    try:
        r = requests.post(f"{API_BASE}/mcp/tools/list_files", json={"path": "."}, timeout=10)
        data = r.json() if r.ok else {"error": f"{r.status_code} — {r.text[:200]}"}
        if "error" in data:
            st.caption(f"Could not list documentation: {data['error']}")
        else:
            for entry in data.get("entries", []):
                suffix = "/" if entry.get("type") == "dir" else ""
                st.caption(f"  • {entry.get('name')}{suffix}")
    except requests.RequestException:
        st.caption("Backend not reachable — start the API first.")

st.divider()

query = st.text_area("Prompt", placeholder="build a todo list with server actions", key="query")

if st.button("Retrieve", key="retrieve_btn", disabled=not query.strip()):
    status = st.empty()
    tools_caption = st.empty()
    answer_placeholder = st.empty()
    tools_used: list[str] = []
    status.caption("Searching documentation...")
    try:
        r = requests.post(f"{API_BASE}/query/stream", json={"query": query}, stream=True, timeout=300)
        if not r.ok:
            status.empty()
            answer_placeholder.error(f"Error: {r.status_code} — {r.text[:200]}")
        else:
            current_event = None
            for line in r.iter_lines(decode_unicode=True):
                if not line:
                    continue
                if line.startswith("event:"):
                    current_event = line[6:].strip()
                    continue
                if not line.startswith("data:") or not current_event:
                    continue
                try:
                    data = json.loads(line[5:].strip())
                except json.JSONDecodeError:
                    data = {}
                if current_event == "tool":
                    tools_used.append(data.get("name", ""))
                    tools_caption.caption(f"Tools used: {', '.join(tools_used)}")
                elif current_event == "done":
                    status.empty()
                    answer = data.get("answer", "")
                    if data.get("exhausted"):
                        st.warning(f"Step budget reached after {data.get('steps', 0)} steps; showing the last partial answer.")
                    if answer:
                        answer_placeholder.markdown(answer)
                    else:
                        answer_placeholder.caption("No relevant documentation.")
                elif current_event == "error":
                    status.empty()
                    answer_placeholder.error(data.get("message", "Unknown error"))
    except requests.RequestException as e:
        status.empty()
        answer_placeholder.error(f"Connection failed: {e}")
