# Makes the top level modules importable from tests/ without installing
