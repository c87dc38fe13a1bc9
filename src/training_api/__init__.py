"""FastAPI application exposing plans, paces, workouts and Strava import."""
