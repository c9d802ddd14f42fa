import uvicorn
from alwayson.logging_utility import logger


if __name__=='__main__':
    logger.info("Starting always-on VPN lockdown service")
    uvicorn.run("alwayson.main:app", host="127.0.0.1", port=8000)
