"""Logging utilities for spupload modules."""

import logging


def get_logger(name: str) -> logging.Logger:
    """Get a logger that automatically inherits from root logger.
    
    Library code never prints on its own: loggers propagate to the root
    logger and default to WARNING until the application configures logging
    (``logging.basicConfig`` or :func:`spupload.setup_logging`).
    
    Args:
        name: Logger name, e.g. ``'spupload.upload.coordinator'``
        
    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.propagate = True
    
    # Only set default level if root logger has no handlers
    # (i.e., basicConfig hasn't been called yet)
    root_logger = logging.getLogger()
    if not root_logger.handlers and logger.level == logging.NOTSET:
        logger.setLevel(logging.WARNING)
    
    return logger
