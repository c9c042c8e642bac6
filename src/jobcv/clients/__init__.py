"""HTTP clients for the job board and the generation backend."""
