from fastapi import APIRouter, Depends, status
from db.database import get_db
from models.sentence import AddTextRequest, AddTextResponse, SentenceWithWords
from utils.ingest import add_text
from utils.index import delete_sentence, words_in_sentence
from utils.store import get_sentence
from utils.tokenizer import get_request_tokenizer

router = APIRouter()

@router.post("", response_model=AddTextResponse)
async def add_sentences(
    payload: AddTextRequest,
    conn = Depends(get_db),
    tokenizer = Depends(get_request_tokenizer),
):
    """Split the posted text into sentences and add each one with its words."""
    sentences_added = add_text(conn, payload.text, tokenizer, source=payload.source)
    return AddTextResponse(success=True, sentences_added=sentences_added)

@router.get("/{sentence_id}", response_model=SentenceWithWords)
async def sentence_detail(sentence_id: int, conn = Depends(get_db)):
    sentence = get_sentence(conn, sentence_id)
    return SentenceWithWords(**sentence.model_dump(), words=words_in_sentence(conn, sentence_id))

@router.delete("/{sentence_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_sentence(sentence_id: int, conn = Depends(get_db)):
    delete_sentence(conn, sentence_id)
