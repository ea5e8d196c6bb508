"""
Streamlit rendering of layout descriptors
"""
import streamlit as st
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from utils.layout import FieldSet, Heading, HelpModal, InputField, Panel, Placeholder

# Download handler: current values -> (data, filename, mime) or None when there is nothing to export
DownloadHandler = Callable[[Dict[str, Any]], Optional[Tuple[bytes, str, str]]]


def render_field(
    field: InputField,
    values: Dict[str, Any],
    downloads: Optional[Dict[str, DownloadHandler]] = None
) -> Any:
    """Render one input and return its current value"""
    options = field.resolve_options(values)

    # Dependent widgets get a fresh key when their parent changes, so stale
    # selections never outlive their options
    key = field.id
    if field.depends_on:
        key = f"{field.id}-{values.get(field.depends_on)}"

    if field.kind == 'radio':
        index = options.index(field.value) if field.value in options else 0
        return st.radio(field.label, options, index=index, key=key, horizontal=True, help=field.help)

    if field.kind == 'number':
        return st.number_input(
            field.label,
            min_value=field.min_value,
            value=field.value,
            step=field.step,
            key=key,
            help=field.help
        )

    if field.kind == 'select':
        if not options:
            return None
        index = options.index(field.value) if field.value in options else 0
        return st.selectbox(
            field.label, options, index=index, key=key,
            format_func=field.format_func, help=field.help
        )

    if field.kind == 'multiselect':
        default = [v for v in field.value if v in options] if field.value is not None else options
        return st.multiselect(
            field.label, options, default=default, key=key,
            format_func=field.format_func, help=field.help
        )

    if field.kind == 'download':
        handler = (downloads or {}).get(field.id)
        payload = handler(values) if handler else None
        if payload is None:
            st.caption(f"{field.label}: nothing to export")
            return None
        data, filename, mime = payload
        return st.download_button(f"📥 {field.label}", data, filename, mime, key=key)

    raise ValueError(f"Unknown field kind: {field.kind}")


def render_control_panel(
    panel: Panel,
    downloads: Optional[Dict[str, DownloadHandler]] = None
) -> Dict[str, Any]:
    """
    Render a panel of inputs

    Returns:
        Dict of field id -> current value
    """
    values: Dict[str, Any] = {}

    for element in panel.elements:
        if isinstance(element, InputField):
            values[element.id] = render_field(element, values, downloads)
        elif isinstance(element, FieldSet):
            with st.container(border=True):
                st.markdown(f"**{element.title}**")
                for field in element.fields:
                    values[field.id] = render_field(field, values, downloads)

    return values


def render_output_panel(panel: Panel, fill: Callable[[Placeholder], None]):
    """Render help, headings and placeholders; placeholders are filled by the caller"""
    for element in panel.elements:
        if isinstance(element, HelpModal):
            with st.expander(f"❓ {element.trigger_label}", expanded=False):
                st.markdown(f"#### {element.title}")
                st.markdown(element.content)
        elif isinstance(element, Heading):
            if element.level <= 2:
                st.header(element.text)
            else:
                st.subheader(element.text)
        elif isinstance(element, Placeholder):
            fill(element)
