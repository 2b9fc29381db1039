"""Identity resolution and remote key installation."""
