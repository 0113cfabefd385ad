"""Shell templates shipped with sqlite-glance completions."""
