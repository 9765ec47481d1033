import time
from enum import Enum

from config.settings import (
    COMPLETION_MODEL,
    MAX_HISTORY_TO_CHECK,
    SEARCH_COLUMNS,
    SEARCH_RESULT_LIMIT
)
from convrag.llm.prompts import NO_CONTEXT_MESSAGE
from convrag.logger import get_logger
from convrag.models import RagResponse, RefinementResult
from convrag.rag.audit import AuditLog
from convrag.rag.context import ContextSufficiencyClassifier, HistoryRelevanceScanner, QuestionRefiner
from convrag.rag.generator import ResponseGenerator
from convrag.rag.service_resolver import ServiceResolver
from convrag.rag.summarizer import QuestionSummarizer, last_question
from convrag.validation import parse_conversation, parse_rag_request

logger = get_logger(__name__)


class PipelineStage(str, Enum):
    VALIDATING = "validating"
    RESOLVING = "resolving"
    SUMMARIZING = "summarizing"
    RETRIEVING = "retrieving"
    GENERATING = "generating"
    CLASSIFYING_CONTEXT = "classifying_context"
    SCANNING_HISTORY = "scanning_history"
    REFINING = "refining"
    DONE = "done"
    FAILED = "failed"


class _Run:
    """Tracks the current stage of one invocation."""

    def __init__(self, procedure):
        self.procedure = procedure
        self.stage = PipelineStage.VALIDATING
        self.started = time.perf_counter()

    def enter(self, stage):
        logger.debug("%s: %s -> %s", self.procedure, self.stage.value, stage.value)
        self.stage = stage

    def elapsed_ms(self):
        return int((time.perf_counter() - self.started) * 1000)


class RAGPipeline:
    """Main orchestrator exposing both conversational entry points.

    respond():         validate -> resolve -> summarize -> retrieve -> generate
    refine_question(): validate -> classify -> scan history -> refine
    """

    RESPOND_PROCEDURE = "rag_search_and_respond"
    REFINE_PROCEDURE = "refine_question"

    def __init__(self, llm_client = None, search_client = None, store = None,
                 audit_log = None, completion_model = COMPLETION_MODEL,
                 result_limit = SEARCH_RESULT_LIMIT, search_columns = SEARCH_COLUMNS,
                 max_history_to_check = MAX_HISTORY_TO_CHECK):
        if llm_client is None:
            from convrag.llm.llm_client import LLMClient
            llm_client = LLMClient()
        if search_client is None:
            from convrag.rag.retrieval import SearchClient
            search_client = SearchClient()
        if store is None:
            from convrag.storage.sqlite_store import SQLiteStore
            store = SQLiteStore()

        self.llm_client = llm_client
        self.search_client = search_client
        self.store = store
        self.audit_log = audit_log or AuditLog(store)
        self.result_limit = result_limit
        self.search_columns = tuple(search_columns)

        self.resolver = ServiceResolver(store)
        self.summarizer = QuestionSummarizer(llm_client, completion_model)
        self.generator = ResponseGenerator(llm_client, completion_model)
        self.classifier = ContextSufficiencyClassifier(llm_client, completion_model)
        self.scanner = HistoryRelevanceScanner(llm_client, completion_model, max_history_to_check)
        self.refiner = QuestionRefiner(llm_client, completion_model)

    def _fail(self, run, error, input_params):
        failed_stage = run.stage
        run.enter(PipelineStage.FAILED)
        message = f"{failed_stage.value}: {error}"
        logger.error("Error in %s at %s: %s", run.procedure, failed_stage.value, error)
        self.audit_log.record_error(run.procedure, message, input_params)

    def respond(self, params):
        """
        Answer the latest prompt from the resolved service's search results.
        Returns a RagResponse; raises the first failing stage's error.
        """
        run = _Run(self.RESPOND_PROCEDURE)
        try:
            request = parse_rag_request(params)
            debug = request.debug
            if debug:
                logger.info("Input parameters: %s", params)

            # Step 1: Resolve the search service name
            run.enter(PipelineStage.RESOLVING)
            service_name = self.resolver.resolve(request)
            if debug:
                logger.info("Using RAG service: %s", service_name)

            # Step 2: Summarize the latest prompts
            run.enter(PipelineStage.SUMMARIZING)
            question_summary = self.summarizer.summarize(request.latest_prompts, debug=debug)
            if debug:
                logger.info("Question summary: %s", question_summary)

            # Step 3: Search with the summary
            run.enter(PipelineStage.RETRIEVING)
            rag_results = self.search_client.search(
                service_name, question_summary, self.search_columns, self.result_limit
            )
            if debug:
                logger.info("RAG search results: %s", rag_results)

            # Step 4: Generate the answer for the last prompt
            run.enter(PipelineStage.GENERATING)
            llm_response = self.generator.generate(
                question_summary, rag_results, last_question(request.latest_prompts), debug=debug
            )
            if debug:
                logger.info("Generated response: %s", llm_response)
        except Exception as e:
            self._fail(run, e, params)
            raise

        run.enter(PipelineStage.DONE)
        if debug:
            self.audit_log.record_debug(
                request.service_id,
                params,
                question_summary,
                rag_results,
                llm_response,
                run.elapsed_ms(),
            )

        return RagResponse(llm_response=llm_response, question_summary=question_summary)

    def refine_question(self, payload):
        """
        Rewrite the current question into a self-contained one when it
        depends on a recent turn of the supplied history.
        """
        run = _Run(self.REFINE_PROCEDURE)
        try:
            conversation = parse_conversation(payload)
            question = conversation.current_question.question

            run.enter(PipelineStage.CLASSIFYING_CONTEXT)
            classification = self.classifier.classify(question)
            if classification.sufficient:
                run.enter(PipelineStage.DONE)
                return RefinementResult(refined_question=question, refined=False)

            run.enter(PipelineStage.SCANNING_HISTORY)
            turn = self.scanner.find_relevant_turn(question, conversation.history)
            if turn is None:
                run.enter(PipelineStage.DONE)
                return RefinementResult(
                    refined_question=question,
                    refined=False,
                    message=NO_CONTEXT_MESSAGE
                )

            run.enter(PipelineStage.REFINING)
            refined_question = self.refiner.refine(turn, question)
        except Exception as e:
            self._fail(run, e, payload)
            raise

        run.enter(PipelineStage.DONE)
        return RefinementResult(refined_question=refined_question, refined=True)
