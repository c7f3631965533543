"""Shared fixtures for tlgen tests."""

import pytest
import sys
import os

# Add the project root to sys.path so 'tools.tlgen' is importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "..", ".."))

from tools.tlgen.parser import parse


CHAT_TL = """\
double ? = Double;
string ? = String;

int32 = Int32;
int53 = Int53;

boolFalse = Bool;
boolTrue = Bool;

vector {t:Type} # [ t ] = Vector t;

//@description An object of this type can be returned on every function call, in case of an error
//@code Error code @message Error message
error code:int32 message:string = Error;

//@description An object of this type is returned on a successful function call for certain functions
ok = Ok;

//@class ChatType @description Describes the type of chat

//@description An ordinary chat with a user @user_id User identifier
chatTypePrivate user_id:int53 = ChatType;

//@description A basic group (a chat with 0-200 other users) @basic_group_id Basic group identifier
chatTypeBasicGroup basic_group_id:int53 = ChatType;

//@description A secret chat with a user
chatTypeSecret = ChatType;


//@description Describes a chat photo
//@small A small (160x160) chat photo variant in JPEG format
//@has_animation True, if the photo has animated variant
chatPhotoInfo flags:# small:file has_animation:Bool = ChatPhotoInfo;

//@description A chat. (Can be a private chat, basic group, supergroup, or secret chat)
//@id Chat unique identifier
//@type Type of the chat
//@title Chat title
//@photo Chat photo; may be null
//@member_counts Member counts per member list
//@last_error Last error returned for the chat
chat id:int53 type:ChatType title:string photo:chatPhotoInfo
     member_counts:vector<vector<int32>> last_error:error = Chat;

//@description Contains a list of chat lists @chat_lists List of chat lists
chatLists chat_lists:vector<chatList> = ChatLists;

---functions---

//@description Returns information about a chat by its identifier @chat_id Chat identifier
getChat chat_id:int53 = Chat;
"""


@pytest.fixture
def chat_tl():
    """Raw chat schema text."""
    return CHAT_TL


@pytest.fixture
def chat_schema():
    """Parsed chat schema."""
    return parse(CHAT_TL)


@pytest.fixture
def ctors(chat_schema):
    """Type constructors by name."""
    return {c.name: c for c in chat_schema.types}
