"""CIP tables 5.2a-c in the IERS Conventions 2003 layout."""
