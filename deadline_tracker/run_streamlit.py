# run_streamlit.py
import os
import subprocess
import sys


def main():
    # launches Streamlit exactly as you would in a console
    app = os.path.join(os.path.dirname(os.path.abspath(__file__)), "app.py")
    subprocess.run(
        [sys.executable, "-m", "streamlit", "run", app],
        check=True
    )


if __name__ == "__main__":
    main()
