"""Dear PyGui front-end for ProfileFixer."""
