from typing import Set

# Suffixes the export analyzer will parse.
SUPPORTED_SUFFIXES: Set[str] = {
    '.ts',
    '.tsx',
    '.mts',
    '.cts',
    '.js',
    '.jsx',
    '.mjs',
    '.cjs',
}

# Parsed with the TSX grammar. JavaScript may contain JSX under any suffix;
# the plain TypeScript grammar rejects JSX.
TSX_SUFFIXES: Set[str] = {'.tsx', '.js', '.jsx', '.mjs', '.cjs'}

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000
