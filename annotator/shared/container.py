# annotator/shared/container.py
from dependency_injector import containers, providers

from annotator.adapters.llm import create_language_model
from annotator.adapters.persistence import create_word_repository
from annotator.adapters.sources import HttpFrequencySource, HttpMediaSource
from annotator.core.use_cases.annotate_word import AnnotationOrchestrator
from annotator.core.use_cases.annotate_words import AnnotateWords, PopulateWords
from annotator.core.use_cases.manage_words import ManageWords
from annotator.shared.config import settings


class Container(containers.DeclarativeContainer):
    """
    Dependency Injection Container.

    Infrastructure handles (LLM, data services, word store) are explicitly
    constructed process-wide singletons; use cases are built per request.
    """

    # 1. Configuration (wrapped so tests can override it)
    config = providers.Object(settings)

    # 2. Gateways (Infrastructure Adapters)
    language_model = providers.Singleton(create_language_model, settings=config)

    frequency_source = providers.Singleton(HttpFrequencySource, settings=config)

    media_source = providers.Singleton(HttpMediaSource, settings=config)

    word_repository = providers.Singleton(create_word_repository, settings=config)

    # 3. Use Cases (stateless, new instance per request)
    annotation_orchestrator = providers.Factory(
        AnnotationOrchestrator,
        llm=language_model,
        frequency_source=frequency_source,
        media_source=media_source,
        timeout=config.provided.ANNOTATION_TIMEOUT_SEC,
        max_tokens=config.provided.LLM_MAX_TOKENS,
        temperature=config.provided.LLM_TEMPERATURE,
    )

    annotate_words_use_case = providers.Factory(
        AnnotateWords,
        orchestrator=annotation_orchestrator,
        repository=word_repository,
        max_words=config.provided.MAX_WORDS_PER_REQUEST,
    )

    populate_words_use_case = providers.Factory(
        PopulateWords,
        annotate_words=annotate_words_use_case,
    )

    manage_words_use_case = providers.Factory(
        ManageWords,
        repository=word_repository,
        page_size=config.provided.WORDS_PAGE_SIZE,
    )


# Instantiate the container for global access (FastAPI, CLI)
container = Container()
