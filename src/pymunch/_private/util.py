import subprocess

def check_graphviz_installed():
    try:
        subprocess.run(["dot", "-V"], check=True, stdout=subprocess.PIPE, stderr=subprocess.PIPE)
        return True
    except (subprocess.CalledProcessError, FileNotFoundError):
        return False

def range_label(first, last) -> str:
    """Printable label for an inclusive symbol range, e.g. 'a-z' or 'x'."""
    if first == last:
        return _symbol_str(first)
    return f"{_symbol_str(first)}-{_symbol_str(last)}"

def _symbol_str(symbol) -> str:
    if isinstance(symbol, str) and symbol.isprintable() and not symbol.isspace():
        return symbol
    return repr(symbol)
