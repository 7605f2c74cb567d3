"""Status workflow - legal transitions for every submission kind."""
