"""Field-force management package.

Organized by feature modules (employees, hierarchy, sales, verification,
attendance, ...) with repository protocols, service layers and a thin Flask
controller layer on top.
"""
