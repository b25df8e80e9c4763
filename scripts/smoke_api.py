import json
import os
import subprocess
import sys
import time
import urllib.error
import urllib.request

SAMPLE_STEPS = b"Week,Steps\nJan 1 - Jan 7,10000\nJan 8 - Jan 14,14000\n"


def wait_for_health(base: str, deadline: float) -> None:
    last_err = None
    while time.time() < deadline:
        try:
            with urllib.request.urlopen(f"{base}/api/health", timeout=2) as resp:
                if resp.status == 200:
                    return
        except (urllib.error.URLError, ConnectionError) as exc:
            last_err = exc
            time.sleep(0.5)
    raise SystemExit(f"Smoke failed: {last_err}")


def main() -> None:
    root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
    venv_py = os.path.join(root, ".venv", "bin", "python")
    py = venv_py if os.path.exists(venv_py) else sys.executable
    env = os.environ.copy()
    env.setdefault("PORT", "8001")

    proc = subprocess.Popen(
        [py, "-m", "uvicorn", "apps.api.main:app", "--port", env["PORT"]],
        cwd=root,
        env=env,
    )

    try:
        base = f"http://127.0.0.1:{env['PORT']}"
        wait_for_health(base, time.time() + 15)
        req = urllib.request.Request(f"{base}/api/v1/wrapped/steps", data=SAMPLE_STEPS, method="POST")
        with urllib.request.urlopen(req, timeout=5) as resp:
            body = json.loads(resp.read())
        if body.get("status") != "ok":
            raise SystemExit(f"Smoke failed: {body}")
        print("Smoke OK")
    finally:
        proc.terminate()
        try:
            proc.wait(timeout=5)
        except subprocess.TimeoutExpired:
            proc.kill()


if __name__ == "__main__":
    main()
