"""Shell registration scripts for sqlite-glance completion."""
