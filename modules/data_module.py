"""
Data Module for ExprQuartiles
Upload an assay matrix and sample annotation, or use the demo experiment
"""
import streamlit as st
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from utils.assay import ExperimentList, make_demo_experiments
from utils.error_handling import ErrorClassifier, format_error_for_streamlit
from utils.file_handlers import build_experiment_list, read_assay_matrix, read_sample_annotation


def get_experiment_list() -> ExperimentList:
    """Uploaded experiments if any, otherwise the demo data"""
    if st.session_state.get('experiment_list') is None:
        if st.session_state.get('demo_experiments') is None:
            st.session_state.demo_experiments = make_demo_experiments()
        return st.session_state.demo_experiments
    return st.session_state.experiment_list


def render_data_page():
    """Render the data page"""
    st.header("📂 Data")

    current = get_experiment_list()
    st.info(f"**Current data:** {current.title or ', '.join(current.names())} "
            f"({current.first().n_samples} samples)")

    st.markdown("""
    Upload an assay matrix (features in rows, samples in columns, first column
    holding feature ids) and, optionally, a sample annotation table with one
    row per sample.
    """)

    col1, col2 = st.columns(2)

    with col1:
        matrix_file = st.file_uploader("Assay matrix (CSV/TSV)", type=['csv', 'tsv', 'txt'], key="upload_matrix")
        measure = st.text_input("Measurement type", value="expression",
                                help="Used in axis labels, e.g. 'normalised counts'")

    with col2:
        annotation_file = st.file_uploader("Sample annotation (CSV/TSV)", type=['csv', 'tsv', 'txt'],
                                           key="upload_annotation")
        sample_col = st.text_input("Sample column (blank to detect)", value="")

    col_use, col_reset = st.columns(2)

    with col_use:
        if st.button("✅ Use uploaded data", disabled=matrix_file is None, use_container_width=True):
            try:
                matrix = read_assay_matrix(matrix_file)
                annotation = None
                if annotation_file is not None:
                    annotation = read_sample_annotation(annotation_file, sample_col or None)
                st.session_state.experiment_list = build_experiment_list(
                    matrix,
                    annotation,
                    assay_name=Path(matrix_file.name).stem,
                    measure=measure or "expression",
                    experiment_name=Path(matrix_file.name).stem,
                )
                st.success(f"Loaded {matrix.shape[0]} features x {matrix.shape[1]} samples")
            except ValueError as e:
                st.error(format_error_for_streamlit(ErrorClassifier.classify_data_error(e)))

    with col_reset:
        if st.button("🔄 Use demo data", use_container_width=True):
            st.session_state.experiment_list = None
            st.rerun()

    with st.expander("Preview current data"):
        experiment = current.first()
        assay = experiment.assay_names()[0]
        st.markdown(f"**{assay}** ({experiment.measure(assay)})")
        st.dataframe(experiment.assays[assay].head(20), use_container_width=True)
        if len(experiment.col_data.columns):
            st.markdown("**Sample annotation**")
            st.dataframe(experiment.col_data, use_container_width=True)
