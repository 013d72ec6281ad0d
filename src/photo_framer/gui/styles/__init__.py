"""Theme palettes and stylesheets."""
