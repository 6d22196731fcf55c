"""bookkit - small-business bookkeeping and financial statements."""

__version__ = "0.1.0"


def __getattr__(name):
    # The CLI pulls in every command module, so load it only on demand
    if name == "main":
        from bookkit.cli.main import main
        return main
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
