#!/usr/bin/env python
"""Script to run the task board API server."""
import os
from pathlib import Path

# Run from the project root so relative DATABASE_URLs land next to the code
project_dir = Path(__file__).resolve().parent
os.chdir(project_dir)

import uvicorn

if __name__ == "__main__":
    uvicorn.run(
        "taskboard.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        reload=os.getenv("RELOAD", "1") == "1",
    )
