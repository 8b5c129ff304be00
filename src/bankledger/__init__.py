"""Bank statement parsing and double-entry classification."""

__version__ = "0.1.0"


# Import main lazily so that "import bankledger" does not pull in click
def __getattr__(name):
    if name == "main":
        from bankledger.cli.main import main
        return main
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
