"""
===============================================================================
ARCHIVO: normalize.py
===============================================================================

CRC CARD (Module)
-------------------------------------------------------------------------------
Nombre:
    Decodificación y normalización de novelas subidas (.txt)

Responsabilidades:
    - Decodificar bytes con BOM UTF-8/UTF-16, UTF-8 o GB18030
      (muchas novelas chinas circulan en GBK).
    - Normalizar: sin NUL, saltos de línea LF, sin espacios en los extremos.

Colaboradores:
    - application/usecases/upload_novel.py
===============================================================================
"""

from __future__ import annotations

import codecs

_NULL_CHAR = "\x00"

# Orden de intento luego de descartar BOMs explícitos.
_FALLBACK_ENCODINGS: tuple[str, ...] = ("utf-8", "gb18030")


def decode_text(content: bytes) -> tuple[str, str]:
    """
    Decodifica el archivo y devuelve (texto, encoding usado).

    Si ningún encoding decodifica limpio, usa UTF-8 con reemplazo
    (mejor una novela con algún "�" que rechazar el upload).
    """
    if content.startswith(codecs.BOM_UTF8):
        return content[len(codecs.BOM_UTF8) :].decode("utf-8", errors="replace"), "utf-8-sig"
    if content.startswith((codecs.BOM_UTF16_LE, codecs.BOM_UTF16_BE)):
        return content.decode("utf-16", errors="replace"), "utf-16"

    for encoding in _FALLBACK_ENCODINGS:
        try:
            return content.decode(encoding), encoding
        except UnicodeDecodeError:
            continue

    return content.decode("utf-8", errors="replace"), "utf-8-replace"


def normalize_text(text: str) -> str:
    """
    Normaliza texto para conteos de caracteres estables.

    - Elimina caracteres NULL.
    - CRLF/CR -> LF (los offsets de ventana dependen de la longitud).
    - strip() de extremos.
    """
    if not text:
        return ""
    text = text.replace(_NULL_CHAR, "")
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    return text.strip()
