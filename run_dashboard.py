"""
Quick launcher for the Streamlit dashboard
"""
import subprocess
import sys
import os

from config.settings import settings


def main():
    """Launch Streamlit dashboard"""
    # Ensure we're in the right directory
    script_dir = os.path.dirname(os.path.abspath(__file__))
    os.chdir(script_dir)
    settings.ensure_directories()

    if not os.path.exists(settings.FEEDBACK_FILE):
        print(f"No feedback store at {settings.FEEDBACK_FILE}. Run `python main.py seed` to load sample data.")

    print("Starting Streamlit dashboard...")
    print("Dashboard will open in your browser at http://localhost:8501")
    return subprocess.run([sys.executable, "-m", "streamlit", "run", "streamlit_app.py"]).returncode


if __name__ == "__main__":
    sys.exit(main())
