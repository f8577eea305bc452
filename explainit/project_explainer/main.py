from fastapi import FastAPI
from explainit.project_explainer.router import router

# Wrapper app so the suite can mount a FastAPI variable named `app`.
app = FastAPI(title="Project Explainer")
app.include_router(router)
