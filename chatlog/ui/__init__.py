"""Colour palettes, text and layout state for the terminal views: menus, form, info bar, footer and help."""