"""Plan-pace calculation and weekly-block organisation. Pure, no I/O."""
