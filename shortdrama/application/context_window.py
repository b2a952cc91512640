"""
===============================================================================
TARJETA CRC - application/context_window.py
===============================================================================

Componente:
  Context Window Selector

Responsabilidades:
  - Estimar dónde cae un episodio dentro de la novela (index/total · L)
    y recortar una ventana de ~W caracteres centrada en ese punto.
  - Ajustar la ventana a los bordes del texto:
      * si el inicio ingenuo es negativo → [0, min(L, W)]
      * si el fin ingenuo excede L      → [max(0, L − W), L]
  - Garantizar siempre 0 <= start <= end <= L (con L < W: todo el texto).

Colaboradores:
  - application/script_builder.py

Notas:
  - Funciones puras y deterministas; sin estado oculto.
===============================================================================
"""

from __future__ import annotations

import math
from dataclasses import dataclass

# Fracción de la novela usada como ventana cuando supera el mínimo.
WINDOW_FRACTION_DIVISOR = 5


@dataclass(frozen=True)
class TextWindow:
    """Offsets [start, end) sobre el texto fuente."""

    start: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.start


def compute_window_size(text_length: int, min_window: float) -> int:
    """
    W = max(mínimo configurado, L / 5), truncado a caracteres enteros.

    Con W entero la ventana sin clamp mide exactamente W; con W fraccionario
    los dos floor() podían dar W + 1.
    """
    return math.floor(max(min_window, text_length / WINDOW_FRACTION_DIVISOR))


def select_context_window(
    text_length: int,
    position_index: int,
    position_total: int,
    window_size: float,
) -> TextWindow:
    """
    Ventana centrada en (position_index / position_total) · text_length.

    `window_size` debería ser entero (ver compute_window_size): con un valor
    fraccionario la ventana sin clamp puede medir un carácter más.

    Raises:
        ValueError: si position_total <= 0, window_size <= 0 o text_length < 0.
    """
    if position_total <= 0:
        raise ValueError(f"position_total must be > 0, got {position_total}")
    if window_size <= 0:
        raise ValueError(f"window_size must be > 0, got {window_size}")
    if text_length < 0:
        raise ValueError(f"text_length must be >= 0, got {text_length}")

    center = (position_index / position_total) * text_length
    start = math.floor(center - window_size / 2)
    end = math.floor(center + window_size / 2)

    if start < 0:
        start = 0
        end = math.floor(min(text_length, window_size))
    if end > text_length:
        end = text_length
        start = math.floor(max(0, text_length - window_size))

    return TextWindow(start=start, end=end)


def slice_window(text: str, window: TextWindow) -> str:
    return text[window.start : window.end]
