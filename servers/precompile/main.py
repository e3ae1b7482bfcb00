"""Entry point for the DeltaMCP Pre-Compiler Server."""

from deltamcp.precompile_server.server import main

if __name__ == "__main__":
    main()
