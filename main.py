# Initialize runtime environment (load .env) before importing other modules
from multi_agent_orch.runtime import init_runtime

init_runtime()

from multi_agent_orch.cli import main  # noqa: E402

if __name__ == "__main__":
    main()
