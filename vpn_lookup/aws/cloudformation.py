# Copyright 2023, Chariot Solutions
# 
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
# 
#     http://www.apache.org/licenses/LICENSE-2.0
# 
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.


""" Code to retrieve CloudFormation stack descriptions.
    """

import boto3
import logging

from functools import lru_cache

from ..core import StackNotFound

logger = logging.getLogger(__name__)


def lookup_stack(stack_name, cfn_client=None):
    """ Returns the description of the named stack, in the form used by
        ec2.lookup_customer_gateway_config(). Accepts either name or stack ID.
        """
    cfn_client = cfn_client or _cfn_client()
    logger.debug("describing stack %s", stack_name)
    stacks = cfn_client.describe_stacks(StackName=stack_name).get('Stacks', [])
    if not stacks:
        raise StackNotFound(stack_name)
    return stacks[0]


def stack_outputs(stack):
    return {output['OutputKey']: output['OutputValue'] for output in stack.get('Outputs', [])}


##
## Internals
##

@lru_cache(maxsize=1)
def _cfn_client():
    return boto3.client('cloudformation')
