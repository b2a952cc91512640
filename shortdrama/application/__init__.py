"""
Capa de aplicación: builders de outline/guion, runner en lotes,
selector de ventana de contexto y casos de uso.
"""
