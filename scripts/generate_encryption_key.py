#!/usr/bin/env python3
"""
Gera uma ENCRYPTION_KEY para as credenciais do portal:
- 32 bytes aleatorios em hexadecimal (64 caracteres)
- Opcionalmente no formato de linha .env
"""

from __future__ import annotations

import argparse
import secrets
import sys

KEY_SIZE_BYTES = 32


def generate_key() -> str:
    return secrets.token_hex(KEY_SIZE_BYTES)


def main() -> int:
    parser = argparse.ArgumentParser(description="Gera uma ENCRYPTION_KEY (AES-256, hex)")
    parser.add_argument("--env", action="store_true", help="Imprime no formato ENCRYPTION_KEY=<valor>")
    args = parser.parse_args()

    key = generate_key()
    print(f"ENCRYPTION_KEY={key}" if args.env else key)
    print(
        "Aviso: trocar a chave torna ilegiveis as senhas ja salvas; salve as credenciais novamente.",
        file=sys.stderr,
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
