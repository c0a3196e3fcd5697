"""
Bot
===

Dialogue engine: entity extraction, intent classification and per-user
conversation handling behind a single ``process`` call.

A request for a user with a conversation in progress resumes that
conversation. Otherwise the winning intent decides the response: a random
fixed answer, a new conversation driven by the intent handler, or a bare
classification result. Requests of one user are processed strictly one after
another; requests of different users run concurrently.
"""

import inspect
import logging
import random
from dataclasses import dataclass, field, replace
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence, Tuple, Union

from ..error_handling import BotError, ClassifierError, ErrorCategory
from ..ner import Entity, EntityManager, EntityMatch
from ..nlp.classifier import (
    Classifier,
    ClassifierDocument,
    ClassifierMatch,
    LogisticRegressionClassifier,
    StatisticalClassifier,
)
from ..nlp.stemmer import PorterStemmer, Stemmer, create_stemmer
from .routine import Routine, RoutineContext
from .session import KeyedLock, Session, SessionRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BotRequest:
    """Incoming user message."""
    text: str
    user_id: str


@dataclass
class BotResponse:
    """Bot reply to a single request."""
    language: Optional[str] = None
    intent: Optional[str] = None
    answer: Optional[str] = None
    classifications: List[ClassifierMatch] = field(default_factory=list)
    entities: List[EntityMatch] = field(default_factory=list)


@dataclass
class BotContext:
    """Conversation handler context."""
    bot: "Bot"
    request: BotRequest
    response: BotResponse
    store: Dict[str, Any]
    routine: RoutineContext = field(repr=False)

    @property
    def user_id(self) -> str:
        return self.request.user_id

    @property
    def classifications(self) -> List[ClassifierMatch]:
        return self.response.classifications

    @property
    def entities(self) -> List[EntityMatch]:
        return self.response.entities

    async def ask(self, **updates) -> BotRequest:
        """
        Reply and wait for the next message of the user.

        Args:
            **updates: BotResponse fields overriding the classification result

        Returns:
            Next request of the same user
        """
        return await self.routine.yield_(replace(self.response, **updates))

    async def say(self, **updates):
        """Reply, resuming once the user writes again."""
        await self.routine.yield_(replace(self.response, **updates))


BotHandler = Callable[[BotContext], Awaitable[None]]
BotMiddleware = Callable[["Bot", BotRequest, BotResponse, Callable[[], None]], Union[None, Awaitable[None]]]


@dataclass
class BotDocument(ClassifierDocument):
    """Bot learning sample with its fixed answers or conversation handler."""
    answers: Optional[List[str]] = None
    handler: Optional[BotHandler] = None


def select_intent(classifications: List[ClassifierMatch], min_threshold: float,
                  min_deviation: float) -> Optional[ClassifierMatch]:
    """
    Pick the winning classification, if it is confident enough.

    The top score must reach min_threshold and lead the runner-up by at least
    min_deviation.
    """
    head_score = classifications[0].score if classifications else 0.0
    next_score = classifications[1].score if len(classifications) > 1 else 0.0
    # Rounded to absorb float error in score differences such as 0.8 - 0.75.
    deviation = round(head_score - next_score, 10)
    if head_score >= min_threshold and deviation >= min_deviation:
        return classifications[0]
    return None


class Bot:
    """Rule-driven chatbot."""

    def __init__(self, stemmer: Optional[Stemmer] = None,
                 classifier: Optional[StatisticalClassifier] = None,
                 languages: Optional[Sequence[str]] = None,
                 keep_stops: bool = True,
                 min_threshold: float = 0.75,
                 min_deviation: float = 0.05,
                 max_reentries: int = 1):
        """
        Initialize bot.

        Args:
            stemmer: Stemmer used by the classifier (Porter by default)
            classifier: Statistical classifier replacing the default one
            languages: Candidate languages for example language detection
            keep_stops: Keep stop words when classifying
            min_threshold: Minimum score of an accepted intent
            min_deviation: Minimum lead of an accepted intent over the runner-up
            max_reentries: How many times one request may be re-dispatched after
                a finished conversation
        """
        self.stemmer = stemmer or PorterStemmer()
        self.entity_manager = EntityManager()
        self.classifier = Classifier(
            stemmer=self.stemmer,
            classifier=classifier,
            keep_stops=keep_stops,
            languages=languages,
        )
        self.min_threshold = min_threshold
        self.min_deviation = min_deviation
        self.max_reentries = max_reentries

        self.documents: Dict[str, BotDocument] = {}
        self.middlewares: List[BotMiddleware] = []
        self.sessions = SessionRegistry()
        self._locks = KeyedLock()

    @classmethod
    def from_settings(cls, settings) -> "Bot":
        """Build a bot from loaded talkcore settings."""
        options = settings.classifier
        stemmer = create_stemmer(options.stemmer, options.languages)
        classifier = LogisticRegressionClassifier(
            stemmer,
            keep_stops=options.keep_stops,
            regularization=options.regularization,
            max_iter=options.max_iter,
        )
        return cls(
            stemmer=stemmer,
            classifier=classifier,
            languages=options.languages,
            keep_stops=options.keep_stops,
            min_threshold=settings.bot.min_threshold,
            min_deviation=settings.bot.min_deviation,
            max_reentries=settings.bot.max_reentries,
        )

    @property
    def is_trained(self) -> bool:
        return self.classifier.is_trained

    def add_entity(self, entity: Entity):
        """Add a new NER entity."""
        self.entity_manager.add_entity(entity)

    def add_document(self, doc: BotDocument):
        """
        Add a new NLU document.

        Args:
            doc: Document with a unique intent
        """
        if doc.intent in self.documents:
            raise BotError(f"Document with intent \"{doc.intent}\" already exists.", intent=doc.intent)
        self.classifier.add_document(doc)
        self.documents[doc.intent] = doc

    def add_middleware(self, middleware: BotMiddleware):
        """Add a middleware to run after every processed request."""
        self.middlewares.append(middleware)

    def train(self):
        """
        Train the bot classifier.

        Calling this method may take some time.
        """
        self.classifier.train()
        logger.info(f"Bot trained with {len(self.documents)} documents")

    def get_store(self, user_id: str) -> Dict[str, Any]:
        session = self.sessions.get(user_id)
        return session.store if session else {}

    async def set_store(self, user_id: str, store: Dict[str, Any]):
        """Replace the store of a user once their pending request is done."""
        async with self._locks.acquire(user_id):
            self.sessions.get_or_create(user_id).store = store

    async def end_conversation(self, user_id: str) -> bool:
        """Cancel and forget the conversation of a user once their pending request is done."""
        async with self._locks.acquire(user_id):
            return self.sessions.end(user_id)

    def close(self):
        """Cancel every conversation and release the classifier worker."""
        for user_id in list(self.sessions.sessions):
            self.sessions.end(user_id)
        self.classifier.close()

    async def process(self, request: BotRequest) -> BotResponse:
        """
        Handle a request and return the bot response.

        Args:
            request: Request to process

        Returns:
            Bot response
        """
        async with self._locks.acquire(request.user_id):
            response = await self._dispatch(request)
            await self._run_middleware(request, response)
            return response

    async def classify(self, request: BotRequest) -> BotResponse:
        """Classify a request without touching conversations or middleware."""
        response, _ = await self._classify(request)
        return response

    async def _classify(self, request: BotRequest) -> Tuple[BotResponse, Optional[BotDocument]]:
        if not self.is_trained:
            raise ClassifierError("Classifier is not trained.", category=ErrorCategory.RUNTIME_STATE)

        result = self.entity_manager.process(request.text)
        classifications = await self.classifier.classify_text(result.template)
        winner = select_intent(classifications, self.min_threshold, self.min_deviation)

        document = self.documents.get(winner.intent) if winner else None
        answer = random.choice(document.answers) if document and document.answers else None
        response = BotResponse(
            language=winner.language if winner else None,
            intent=winner.intent if winner else None,
            answer=answer,
            classifications=classifications,
            entities=result.entities,
        )
        logger.debug(
            f"Classified request of user {request.user_id}",
            extra={
                "template": result.template,
                "intent": response.intent,
                "scores": [(match.intent, match.score) for match in classifications],
            },
        )
        return response, document

    async def _dispatch(self, request: BotRequest) -> BotResponse:
        response, document = await self._classify(request)

        for _ in range(1 + self.max_reentries):
            session = self.sessions.get(request.user_id)

            # Continue the conversation in progress.
            routine = session.routine if session is not None else None
            if routine is not None:
                output = await self._drive(session, routine, request)
                if output is not None and not routine.is_done():
                    return output
                logger.info(f"Conversation of user {request.user_id} finished")
                session.discard_routine()
                continue

            if document is None or document.answers:
                return response

            if document.handler is not None:
                return await self._start_conversation(request, response, document)

            return response

        raise BotError(
            f"Request of user {request.user_id} was re-dispatched more than "
            f"{self.max_reentries} times.",
            category=ErrorCategory.RUNTIME_STATE,
            user_id=request.user_id,
        )

    async def _start_conversation(self, request: BotRequest, response: BotResponse,
                                  document: BotDocument) -> BotResponse:
        session = self.sessions.get_or_create(request.user_id)
        handler = document.handler

        async def script(routine_context: RoutineContext):
            context = BotContext(
                bot=self,
                request=request,
                response=response,
                store=session.store,
                routine=routine_context,
            )
            await handler(context)

        routine = session.routine = Routine(script)
        logger.info(f"Started conversation \"{document.intent}\" for user {request.user_id}")

        output = await self._drive(session, routine, request)
        if routine.is_done() and session.routine is routine:
            session.routine = None
        return output if output is not None else response

    async def _drive(self, session: Session, routine: Routine,
                     request: BotRequest) -> Optional[BotResponse]:
        session.touch()
        try:
            return await routine.process(request)
        except Exception as e:
            logger.error(f"Conversation handler failed for user {session.user_id}: {e}")
            raise

    async def _run_middleware(self, request: BotRequest, response: BotResponse):
        for middleware in self.middlewares:
            stopped = False

            def stop():
                nonlocal stopped
                stopped = True

            result = middleware(self, request, response, stop)
            if inspect.isawaitable(result):
                await result
            if stopped:
                logger.debug(f"Middleware {getattr(middleware, '__name__', middleware)!r} stopped the pipeline")
                break
