"""Lanzador del panel RNDC.

Importa el paquete por su nombre (``src.rndc_admin``) para que los imports
relativos internos funcionen tanto en desarrollo como empaquetado.
"""
import os
import sys


def _ensure_root_in_path() -> None:
    base_dir = os.path.dirname(os.path.abspath(__file__))
    if base_dir not in sys.path:
        sys.path.insert(0, base_dir)


def main() -> None:
    _ensure_root_in_path()
    from src.rndc_admin.__main__ import main as app_main
    app_main()


if __name__ == "__main__":
    main()
