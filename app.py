import os

from chatbot.config import validate_environment_variables
from chatbot.constants import KNOWLEDGE_BASE_PATH
from chatbot.dialogue import DialogueRouter
from chatbot.knowledge_store import KnowledgeStore
from chatbot.logger import logger
from chatbot.server import create_app
from chatbot.session import get_state

# Validate environment variables at startup
validate_environment_variables()

# Exits the process if the knowledge base can't be read
store = KnowledgeStore(KNOWLEDGE_BASE_PATH)
store.load()

router = DialogueRouter(store, get_state())
fastapi_app = create_app(router)


if __name__ == "__main__":
    import uvicorn

    port = int(os.getenv("PORT", 3000))
    logger.info("Customer service bot listening at http://localhost:%s", port)
    uvicorn.run(
        "app:fastapi_app",
        host="0.0.0.0",
        port=port,
        reload=os.getenv("ENV") != "prod",
    )
