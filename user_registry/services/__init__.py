"""Service Layer — async orchestration of core rules over boundary protocols."""
