"""mywn: local storage for the to-do list app."""
