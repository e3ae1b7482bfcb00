"""Pre-compiler MCP Server - change classification for incremental builds."""

import logging

from fastmcp import FastMCP

from .config import get_config
from .tools import register_precompile_tools

logger = logging.getLogger(__name__)

__version__ = "0.1.0"

# Initialize the Pre-compiler MCP server
mcp = FastMCP(
    name="DeltaMCP Pre-Compiler Server",
    version=__version__,
    instructions="""
        Pre-compiler server decides which incremental build steps file changes require:

        Core Tools:
        - classify_changes: Classify an explicit list of changed paths
        - detect_changes: Diff the project against its last snapshot, then classify
        - get_project_layout: Show the folders and generators used for classification

        Results tell you whether to:
        - Recompile resources into R.java (compile_resources)
        - Re-run AIDL or RenderScript generators (generate:<name> phases)
        - Fix XML or manifest problems (markers)

        Best Practices:
        - Use detect_changes at the start of every build cycle
        - Configure source folders in deltamcp.yaml at the project root
    """,
)

# Register all pre-compiler tools
register_precompile_tools(mcp)


def main():
    """Configure logging from the environment and serve over stdio."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    config = get_config()
    logging.getLogger().setLevel(getattr(logging, config.log_level))
    logger.info("Starting pre-compiler server (build verbosity: %s)", config.build_verbosity)
    mcp.run()


if __name__ == "__main__":
    main()
