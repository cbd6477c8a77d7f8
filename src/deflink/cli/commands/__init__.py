"""Click commands registered on the ``deflink`` group."""
