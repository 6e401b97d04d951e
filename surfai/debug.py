# ABOUTME: Verbose debug printing toggled by the DEBUG environment variable
# ABOUTME: Keeps noisy prompt/response tracing out of normal runs

from surfai.config import Config


def debug_log(message: str, category: str = "DEBUG") -> None:
    """Print a tagged debug line when DEBUG=true."""
    if not Config.DEBUG:
        return
    print(f"[{category}] {message}", flush=True)
