from dotenv import load_dotenv
from fastapi import FastAPI

from deploytree.config import VERSION
from deploytree.core.errors import APIError, api_error_handler
from deploytree.log_utils import inject_request_id, setup_logging
from deploytree.routers.api import api_router


load_dotenv()
setup_logging()

app = FastAPI(title="Deployment Tree", version=VERSION)
app.add_exception_handler(APIError, api_error_handler)
app.include_router(api_router)


@app.middleware("http")
async def add_req_id(request, call_next):
    return await inject_request_id(request, call_next)
