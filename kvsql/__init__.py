"""SQL statement trees, plan executors and result sets over a transactional row store."""

__version__ = "0.1.0"