from .base import CamelModel, MessageResponse, Pagination
from .auth import AuthResponse, AuthUser
from .user import (
    User, UserCredentials, UserRoleUpdate, UserDeleteRequest,
    UserListResponse, UserMutationResponse,
)
from .event import (
    Event, EventCreate, EventUpdate, EventUpdateRequest,
    EventListResponse, EventMutationResponse,
)
from .partner import (
    Partner, PartnerCreate, PartnerUpdate, PartnerUpdateRequest,
    PartnerListResponse, PartnerMutationResponse,
)
from .team_member import (
    TeamMember, TeamMemberCreate, TeamMemberUpdate, TeamMemberUpdateRequest,
    TeamMemberListResponse, TeamMemberMutationResponse,
)
from .upload import (
    UploadRequest, UploadTicket, UploadCommitRequest, UploadCommitResponse,
    DirectUploadResponse,
)
