"""
Help Module for ExprQuartiles
Usage guide and file format reference
"""
import streamlit as st
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from utils.assets import MissingAssetError, default_asset_loader


def render_help_page():
    """Render the help page"""
    st.header("📚 Help & Documentation")

    tab1, tab2, tab3, tab4 = st.tabs([
        "🚀 Quick Start",
        "📦 Quartile Plots",
        "📁 File Formats",
        "❓ FAQ",
    ])

    with tab1:
        render_quick_start()

    with tab2:
        render_quartile_help()

    with tab3:
        render_file_formats()

    with tab4:
        render_faq()


def render_quick_start():
    """Render quick start guide"""
    st.subheader("🚀 Quick Start Guide")

    st.markdown("""
    ### Step 1: Load data
    1. Click **Data** in the sidebar
    2. Upload an assay matrix and (optionally) a sample annotation
    3. Click **Use uploaded data**

    Without an upload the app uses a small demo experiment.

    ### Step 2: Plot
    1. Click **Quartile plots** in the sidebar
    2. Choose **boxes** or **lines**
    3. Pick a variable under **Color by** to group samples
    4. Download the box plot as PNG from the **Export** box
    """)


def render_quartile_help():
    """Render the bundled quartile plot help"""
    st.subheader("📦 Quartile Plots")
    try:
        st.markdown(default_asset_loader().load('boxplot.md'))
    except MissingAssetError as e:
        st.warning(f"Help document unavailable: {e}")


def render_file_formats():
    """Render file format reference"""
    st.subheader("📁 File Formats")

    st.markdown("""
    ### Assay matrix
    Comma- or tab-separated, features in rows and samples in columns. The
    first column holds feature ids.

    ```
    gene_id,S01,S02,S03
    ENSG00000000003,120,98,143
    ENSG00000000005,0,2,1
    ```

    ### Sample annotation
    One row per sample. The sample column is detected from `SampleID`,
    `sample`, `Sample`, `sample_id` or `name`, or can be given explicitly.
    Columns with between 2 and 20 distinct values become grouping variables.

    ```
    SampleID,condition,batch
    S01,control,1
    S02,treated,1
    S03,treated,2
    ```
    """)


def render_faq():
    """Render FAQ"""
    st.subheader("❓ Frequently Asked Questions")

    with st.expander("Why log2(x + 1)?"):
        st.markdown("Adding 1 keeps zero values defined on the log scale.")

    with st.expander("Which plot type is chosen by default?"):
        st.markdown("Boxes for experiments with up to 20 samples, lines above that.")

    with st.expander("What does a whisker distance of 0 do?"):
        st.markdown("The whiskers sit on the quartiles, so every value outside "
                    "the box counts as an outlier.")

    with st.expander("Why is a sample labelled N/A?"):
        st.markdown("It has no value for the variable chosen under **Color by**.")
