"""Terminal front end: rendering, the Textual application and the CLI."""
