"""Flask 视图适配层."""
