# userauth/graphql/schema.py

import strawberry
from strawberry.fastapi import GraphQLRouter

from userauth.dependencies import get_context
from userauth.graphql.resolvers import Mutation, Query

schema = strawberry.Schema(query=Query, mutation=Mutation)

graphql_router = GraphQLRouter(schema, context_getter=get_context)
