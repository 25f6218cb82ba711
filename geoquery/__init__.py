"""Map query console: parses user input, queries a spatial-index service and draws the results."""
