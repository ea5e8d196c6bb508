"""
ExprQuartiles - Main Application
Quartile plots for assay matrices
"""
import streamlit as st
from streamlit_option_menu import option_menu
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from loguru import logger

from config import config


# Get version
def get_version():
    """Read version from VERSION file"""
    version_file = Path(__file__).parent.parent / "VERSION"
    if version_file.exists():
        return version_file.read_text().strip()
    return "dev"

__version__ = get_version()

# Page configuration
st.set_page_config(
    page_title=config.app_name,
    page_icon="📦",
    layout="wide",
    initial_sidebar_state="expanded"
)

# Custom CSS
st.markdown("""
<style>
    .main-header {
        font-size: 2.5rem;
        font-weight: bold;
        color: #3C5488;
        text-align: center;
        padding: 1rem 0;
    }
    .sub-header {
        font-size: 1.2rem;
        color: #666;
        text-align: center;
        margin-bottom: 2rem;
    }
</style>
""", unsafe_allow_html=True)


def configure_logging():
    """Log to stderr, verbosely when DEBUG is set"""
    if st.session_state.get('logging_configured'):
        return
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if config.debug else "INFO")
    st.session_state.logging_configured = True

    for error in config.validate():
        logger.warning(f"Configuration problem: {error}")


def init_session_state():
    """Initialize session state variables"""
    defaults = {
        # Data
        'experiment_list': None,
        'demo_experiments': None,

        # Plot state
        'boxplot_controller': None,
    }

    for key, value in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = value


def render_sidebar():
    """Render the sidebar navigation"""
    with st.sidebar:
        st.markdown(f"### 📦 {config.app_name}")

        selected = option_menu(
            menu_title="Navigation",
            options=[
                "Home",
                "Data",
                "Quartile plots",
                "Help"
            ],
            icons=["house", "folder", "box", "question-circle"],
            default_index=0,
            styles={
                "container": {"padding": "5px"},
                "icon": {"color": "#3C5488", "font-size": "18px"},
                "nav-link": {"font-size": "14px", "text-align": "left", "margin": "0px"},
                "nav-link-selected": {"background-color": "#3C5488"},
            }
        )

        st.divider()
        if st.session_state.experiment_list is not None:
            st.success(f"**Data:** {st.session_state.experiment_list.title}")
        else:
            st.info("Using demo data")

        # Show version at bottom
        st.divider()
        st.caption(f"Version {__version__}")

        return selected


def render_home():
    """Render the home page"""
    st.markdown(f'<p class="main-header">📦 {config.app_name}</p>', unsafe_allow_html=True)
    st.markdown(f'<p class="sub-header">{config.app_tagline}</p>', unsafe_allow_html=True)

    col1, col2 = st.columns(2)

    with col1:
        st.markdown("""
        ### 📦 Boxes
        - One box per sample
        - Color by an experimental variable
        - Adjustable whisker distance
        - PNG export
        """)

    with col2:
        st.markdown("""
        ### 📈 Lines
        - Median, quartile and whisker lines
        - Interactive outlier points
        - Scales to hundreds of samples
        """)

    st.divider()
    st.markdown(f"""
    **Getting started:** load a matrix under **Data** (or keep the demo data),
    then open **Quartile plots**. Experiments with up to
    {config.boxplot.boxes_max_samples} samples start with boxes, larger ones with lines.
    """)


def main():
    """Main application entry point"""
    configure_logging()
    init_session_state()

    selected = render_sidebar()

    # Route to appropriate page
    if "Home" in selected:
        render_home()
    elif "Data" in selected:
        from modules.data_module import render_data_page
        render_data_page()
    elif "Quartile plots" in selected:
        from modules.boxplot_module import render_boxplot_page
        render_boxplot_page()
    elif "Help" in selected:
        from modules.help_module import render_help_page
        render_help_page()


if __name__ == "__main__":
    main()
