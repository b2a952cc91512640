"""Sub-routers por feature (proyectos, outline, guiones)."""
