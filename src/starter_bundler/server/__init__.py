"""HTTP transport for starter bundle downloads."""
