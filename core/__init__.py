"""Models, interfaces, errors and the check registry."""
