import argparse
import subprocess
from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from packages.config import API_HOST, API_PORT, RUN_MODE


def venv_python():
    venv = ROOT / ".venv" / ("Scripts" if sys.platform.startswith("win") else "bin") / (
        "python.exe" if sys.platform.startswith("win") else "python"
    )
    return venv if venv.exists() else None


def main():
    p = argparse.ArgumentParser(description="Serve the wrapped API with uvicorn.")
    p.add_argument("--host", default=API_HOST)
    p.add_argument("--port", type=int, default=API_PORT)
    p.add_argument("--no-reload", action="store_true", help="Disable auto-reload outside prod.")
    args = p.parse_args()

    py = venv_python() or sys.executable
    reload_flag = ["--reload"] if RUN_MODE != "prod" and not args.no_reload else []
    subprocess.run(
        [str(py), "-m", "uvicorn", "apps.api.main:app", *reload_flag, "--host", args.host, "--port", str(args.port)],
        check=True,
        cwd=str(ROOT),
    )


if __name__ == "__main__":
    main()
