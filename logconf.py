import logging


def configure_logging(verbose: bool = False) -> None:
    """
    Send log records to stderr. Library modules only log at DEBUG, so they are silent unless verbose
    """
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")
